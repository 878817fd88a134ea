from .broadcast import BroadcastService  # noqa: F401
