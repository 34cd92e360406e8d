# Prescriptions Feature
