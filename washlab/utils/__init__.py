"""Formatting helpers for bot replies"""
