"""
Sales app: POS money movements that feed the cash drawer.
"""
