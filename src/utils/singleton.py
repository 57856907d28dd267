"""Singleton metaclass for process-wide resource owners."""

import threading
from typing import Any, Dict, Type


class Singleton(type):
    """Metaclass for creating singleton classes.

    Instance creation is serialized so that two threads hitting the first
    call at once still end up sharing one instance.

    Usage:
        class DatabaseManager(metaclass=Singleton):
            pass
    """

    _instances: Dict[Type, Any] = {}
    _instances_lock = threading.Lock()

    def __call__(cls, *args, **kwargs):
        """Ensure only one instance of the class exists."""
        if cls not in cls._instances:
            with Singleton._instances_lock:
                if cls not in cls._instances:
                    cls._instances[cls] = super(Singleton, cls).__call__(*args, **kwargs)
        return cls._instances[cls]

    def reset(cls) -> None:
        """Forget the cached instance so the next call builds a fresh one."""
        with Singleton._instances_lock:
            cls._instances.pop(cls, None)
