# Staff Feature
