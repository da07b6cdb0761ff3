"""Team Calendar package.

Organized by feature modules (holidays, patterns, resolution, users) with a
thin Flask controller layer over service/repository layers.
"""
