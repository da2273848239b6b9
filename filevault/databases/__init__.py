from filevault.databases.mongodb import mongodb

__all__ = ["mongodb"]
