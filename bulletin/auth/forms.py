from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField
from wtforms.validators import DataRequired, Email, EqualTo, Length


def strip_and_lower(value):
    return value.strip().lower() if isinstance(value, str) else value


class LoginForm(FlaskForm):
    email = StringField('Email', filters=[strip_and_lower],
                        validators=[DataRequired(message='Please enter both email and password.')])
    password = PasswordField('Password',
                             validators=[DataRequired(message='Please enter both email and password.')])
    submit = SubmitField('Log In')


class SignupForm(FlaskForm):
    email = StringField('Email', filters=[strip_and_lower], validators=[
        DataRequired(message='All fields are required.'),
        Email(message='Please enter a valid email address.'),
        Length(max=255)
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message='All fields are required.'),
        Length(min=8, message='Password must be at least 8 characters long.')
    ])
    # Field name matches the signup form's wire contract
    confirmPassword = PasswordField('Confirm Password', validators=[
        DataRequired(message='All fields are required.'),
        EqualTo('password', message='Passwords do not match.')
    ])
    submit = SubmitField('Create Account')
