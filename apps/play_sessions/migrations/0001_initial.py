# Generated manually for the play_sessions app

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Session',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('play_date', models.DateField(unique=True)),
                ('court_count', models.PositiveIntegerField(default=0)),
                ('shuttle_count', models.PositiveIntegerField(default=0)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed'), ('inactive', 'Inactive')], default='pending', max_length=20)),
                ('total_cost', models.PositiveIntegerField(default=0)),
                ('computed', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'play_sessions',
                'ordering': ['-play_date'],
                'indexes': [
                    models.Index(fields=['status', 'play_date'], name='sessions_status_date_idx'),
                    models.Index(fields=['computed', 'play_date'], name='sessions_computed_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Vote',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('vote_type', models.CharField(choices=[('going', 'Going'), ('not_going', 'Not going')], max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('session', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='votes', to='play_sessions.session')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='votes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'votes',
                'ordering': ['created_at'],
                'constraints': [
                    models.UniqueConstraint(fields=('session', 'user'), name='unique_vote_per_session_user'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ProxyVote',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('vote_type', models.CharField(choices=[('going', 'Going'), ('not_going', 'Not going')], default='going', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('session', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='proxy_votes', to='play_sessions.session')),
                ('voter', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='proxy_votes_cast', to=settings.AUTH_USER_MODEL)),
                ('target', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='proxy_votes_received', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'proxy_votes',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['session', 'voter'], name='proxy_votes_session_voter_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('session', 'voter', 'target'), name='unique_proxy_vote_per_pair'),
                ],
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('action', models.CharField(max_length=50)),
                ('payload', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('session', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to='play_sessions.session')),
            ],
            options={
                'db_table': 'audit_logs',
                'ordering': ['-created_at'],
            },
        ),
    ]
