# Catalog Feature
