"""joseutils tests"""
