"""
hoamic - Higher-Order Ambisonics point-source encoder and virtual microphone.
"""
