"""Snapshot validation utilities."""

from .integrity import DanglingReference, find_dangling_references

__all__ = ["DanglingReference", "find_dangling_references"]
