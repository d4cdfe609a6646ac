"""Application layer: DTOs, interfaces, and the authorization services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (stores, directories, cache).
"""
