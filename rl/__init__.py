"""Reinforcement learning tooling for the invaders environment"""
