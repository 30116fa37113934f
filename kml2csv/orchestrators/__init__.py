"""Conversion orchestration.

- conversion: ``Converter`` sequencing read → parse → extract → encode → save
"""
