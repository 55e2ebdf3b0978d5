"""
clipgrade - parsing and English-only policy enforcement for video submission evaluations.
"""
