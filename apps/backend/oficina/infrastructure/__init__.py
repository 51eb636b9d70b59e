"""
Infrastructure layer: storage backends, mock data store and table-backed
repositories.
"""
