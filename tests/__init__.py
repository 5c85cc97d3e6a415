"""
Nacho Engine Test Suite
=======================

Test Organization
-----------------
- tests/unit/          : Service and formula tests against the packaged balance
- tests/unit/domain/   : Domain model invariants
- tests/unit/core/     : Configuration and logging infrastructure

Testing Philosophy
------------------
- Every service is pure over its inputs: tests pass the clock and a seeded
  or mocked random source explicitly
- Expected numbers are computed by hand from the balance tables
- Use pytest markers to categorize and selectively run tests
- Follow AAA pattern: Arrange, Act, Assert
"""
