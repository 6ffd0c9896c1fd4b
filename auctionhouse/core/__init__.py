"""Core auction engine components"""
