from .tab import TabStorage, StorageListener
from .shared import SharedStorage

__all__ = ["SharedStorage", "StorageListener", "TabStorage"]
