from .error_log_gate import ErrorLogGate as ErrorLogGate
