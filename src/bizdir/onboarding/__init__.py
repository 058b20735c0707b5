"""Multi-step business onboarding wizard.

The wizard collects a business listing over several server-validated
steps, keeps partial data in the visitor's session, and creates the
business record only on final submission.
"""
