"""Store, workflows and reference services"""
