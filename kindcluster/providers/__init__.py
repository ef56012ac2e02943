"""Helpers for running cluster nodes as containers."""