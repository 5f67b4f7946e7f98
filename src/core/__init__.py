"""Core domain package for listblock.

Core contains pattern storage, matching, and change watching without any
Textual or storage-specific code, keeping the filter logic portable.
"""
