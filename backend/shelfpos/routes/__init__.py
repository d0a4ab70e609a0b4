# Overview: JSON blueprints over the service layer.
