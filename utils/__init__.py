"""
Shared helpers.

See utils/text_utils.py for text normalization.
"""
