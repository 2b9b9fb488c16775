from .sender_pool import SenderPool as SenderPool
