"""WashLab laundry back office"""
