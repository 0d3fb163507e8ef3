"""
Mirror a SmugMug collection (category / subcategory / album / image) into
a local directory, downloading new or changed images and removing local
files the server no longer has.
"""
