"""Bundled tool plugins, one package per tool."""
