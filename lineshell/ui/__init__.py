"""Text rendering for shell output"""
