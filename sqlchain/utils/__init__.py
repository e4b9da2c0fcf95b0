from sqlchain.utils import logging, serializers

__all__ = ("logging", "serializers")
