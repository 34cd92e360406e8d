# Lab Tests Feature
