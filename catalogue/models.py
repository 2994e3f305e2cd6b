import uuid

from django.core.exceptions import ValidationError
from django.db import models

from utils.enums import ProductAvailabilityChoices


class Product(models.Model):
    """
    A product offered to work plans - an ordered sequence of processes
    """
    name = models.CharField(max_length=255, unique=True)
    product_uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    description = models.TextField(blank=True, null=True)
    availability = models.CharField(
        max_length=20,
        choices=ProductAvailabilityChoices.choices,
        default=ProductAvailabilityChoices.AVAILABLE
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def is_available(self):
        return self.availability == ProductAvailabilityChoices.AVAILABLE

    @property
    def processes(self):
        """Processes of this product in stage order"""
        return [link.process for link in self.product_processes.select_related('process').order_by('stage')]


class Process(models.Model):
    name = models.CharField(max_length=255, unique=True)
    process_uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    TAT = models.PositiveIntegerField(default=0, help_text="Turnaround time in days")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name_plural = 'Processes'

    def __str__(self):
        return self.name

    def default_path(self):
        """
        Follow the default pairings from the start edge to the end edge.
        Returns the list of modules on the default path.
        """
        pairings = list(self.module_pairings.filter(default_path=True))
        by_origin = {pairing.from_step_id: pairing for pairing in pairings}

        path = []
        current = by_origin.get(None)
        seen = set()
        while current is not None and current.to_step_id is not None:
            if current.to_step_id in seen:
                raise ValidationError(f"Default path of process {self.name} contains a cycle")
            seen.add(current.to_step_id)
            path.append(current.to_step)
            current = by_origin.get(current.to_step_id)

        if current is None:
            raise ValidationError(f"Default path of process {self.name} does not reach an end")
        return path

    def is_valid_path(self, module_ids):
        """
        A module sequence is valid when a pairing links the start to the first
        module, every module to the next one, and the last module to the end.
        """
        if not module_ids:
            return False
        edges = set(self.module_pairings.values_list('from_step_id', 'to_step_id'))
        steps = [None] + list(module_ids) + [None]
        return all((a, b) in edges for a, b in zip(steps, steps[1:]))

    def resolve_modules(self, module_ids):
        """Return the ProcessModule instances for a valid path, in path order"""
        if not self.is_valid_path(module_ids):
            raise ValidationError(f"Invalid module choice for process {self.name}")
        modules = {module.id: module for module in self.process_modules.filter(id__in=module_ids)}
        return [modules[module_id] for module_id in module_ids]


class ProductProcess(models.Model):
    """
    Position of a process within a product
    """
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='product_processes')
    process = models.ForeignKey(Process, on_delete=models.CASCADE, related_name='product_processes')
    stage = models.PositiveIntegerField()

    class Meta:
        ordering = ['product', 'stage']
        unique_together = [['product', 'stage']]

    def __str__(self):
        return f"{self.product.name} [{self.stage}] -> {self.process.name}"


class ProcessModule(models.Model):
    name = models.CharField(max_length=255)
    process = models.ForeignKey(Process, on_delete=models.CASCADE, related_name='process_modules')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']
        unique_together = [['name', 'process']]

    def __str__(self):
        return f"{self.name} ({self.process.name})"


class ProcessModulePairing(models.Model):
    """
    Directed edge between two modules of a process.
    A null from_step is a start edge, a null to_step is an end edge.
    """
    process = models.ForeignKey(Process, on_delete=models.CASCADE, related_name='module_pairings')
    from_step = models.ForeignKey(
        ProcessModule,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='outgoing_pairings'
    )
    to_step = models.ForeignKey(
        ProcessModule,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='incoming_pairings'
    )
    default_path = models.BooleanField(default=False)

    class Meta:
        ordering = ['process', 'id']

    def __str__(self):
        source = self.from_step.name if self.from_step else 'START'
        target = self.to_step.name if self.to_step else 'END'
        return f"{self.process.name}: {source} -> {target}"

    def clean(self):
        if self.from_step is None and self.to_step is None:
            raise ValidationError("A pairing needs at least one module")
        for module in (self.from_step, self.to_step):
            if module is not None and module.process_id != self.process_id:
                raise ValidationError("Paired modules must belong to the pairing's process")
