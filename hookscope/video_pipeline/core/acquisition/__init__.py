from .media_acquirer import MediaAcquirer, SourceReference

__all__ = ["MediaAcquirer", "SourceReference"]
