# Services package init
"""
Cupcake Store — Services Layer
===============================

What:  Business rules between routes (HTTP) and repositories (persistence).
How:   Services receive their repository through the constructor and return
       ORM entities; routes turn those into response models.

Service Inventory:
    - validation: pure create/update rules (trim, length, price, merge)
    - CupcakeService: create/get/list/update/delete orchestration
"""
