"""Command-line interface for tindahan.

Usage:
    tindahan import price-list.xlsx
    tindahan search "v fresh"
    tindahan price 7 v fresh
    tindahan categories rename Rice Grains
    tindahan serve --port 8080
"""
