"""Domain packages - one per business area (repository / service / schemas / router)"""
