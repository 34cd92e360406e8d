# Pharmacy Requests Feature
