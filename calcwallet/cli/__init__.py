"""calcwallet command-line interface"""
