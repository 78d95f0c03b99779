"""
Cash drawer app: daily opening, closing and shift settlement of branch cash.
"""
