"""Training configurations"""
