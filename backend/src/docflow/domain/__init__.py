"""Domain layer - pure business rules without I/O"""
