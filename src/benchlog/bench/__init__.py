"""Benchmarking subsystem for benchlog.

Times workloads repeatedly, summarizes the samples, and compares each
run against the previous one recorded in a YAML history log using a
Wilcoxon signed-rank test.
"""
