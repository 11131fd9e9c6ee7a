"""Core GridFS adapter components."""
