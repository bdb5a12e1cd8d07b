"""Local key-value storage"""
