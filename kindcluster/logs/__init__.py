"""Copying directories from nodes onto the host."""