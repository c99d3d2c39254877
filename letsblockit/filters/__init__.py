"""Filter templates: models, validation and parsing of template files and presets."""