import click
from flask.cli import with_appcontext
from schoolsite import db
from schoolsite.models.user import User
from schoolsite.utils.validators import PasswordValidator


@click.command('create-admin')
@click.option('--email', prompt=True)
@click.option('--name', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@with_appcontext
def create_admin(email, name, password):
    """Create an administrator account, or promote an existing one"""
    is_valid, issues = PasswordValidator().validate_password(password)
    if not is_valid:
        raise click.BadParameter('; '.join(issues), param_hint='--password')

    user = User.query.filter_by(email=email).first()
    if user is None:
        user = User(email=email, name=name)
        db.session.add(user)
    user.name = name
    user.is_admin = True
    user.set_password(password)
    db.session.commit()
    click.echo(f'Administrator {email} is ready.')
