from crewbook.models.storage_item import StorageItem

__all__ = ["StorageItem"]
