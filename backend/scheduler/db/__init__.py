# Database models, session factory and seed data
