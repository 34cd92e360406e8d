# Profiles Feature
