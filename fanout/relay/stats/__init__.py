from .forward_stats import ForwardStats as ForwardStats
