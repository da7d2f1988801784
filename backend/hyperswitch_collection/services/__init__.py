"""
Services package: template resolution, template store, payment status table
and redirect signatures.
"""
