"""
SQLite to MongoDB Migration Tool

Copies every table of a SQLite database into a MongoDB database, one
collection per table, inferring a BSON type for each cell from the declared
column type and the cell's own storage class.
"""

__version__ = "0.1.0"
