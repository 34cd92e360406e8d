# Appointments Feature
