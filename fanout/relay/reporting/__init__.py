from .stats_reporter import StatsReporter as StatsReporter
