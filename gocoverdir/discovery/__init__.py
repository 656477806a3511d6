"""
Directory discovery: finds the directories go test should run in.
"""

from .directory_walker import cover_directory, contains_go_files, list_directory

__all__ = [
    'cover_directory',
    'contains_go_files',
    'list_directory'
]
