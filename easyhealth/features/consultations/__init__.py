# Consultations Feature
