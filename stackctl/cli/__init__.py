"""Command line interface for stackctl"""
