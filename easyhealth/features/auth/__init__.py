# Authentication Feature
