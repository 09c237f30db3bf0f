"""Workbook tables, key-value cache, serializers and configuration files."""
