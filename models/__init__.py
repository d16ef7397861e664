"""
Persistence package. `storage` is the process-wide DBStorage; the Flask app
factory points it at a database with storage.configure() + storage.reload().
"""
from models.db_storage import DBStorage

storage = DBStorage()
